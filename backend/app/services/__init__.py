"""
Services module - Application business logic layer.

Modules:
- analytics: Workout statistics engine
- ingest: CSV validation and bulk upload
- sheets: Google Sheets workout store
- workouts: Snapshot loading with demo fallback
- ai / adapter: Image extraction through AI providers
"""
