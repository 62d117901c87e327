"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every feature uses: settings, logging,
the database handle, the geocoding client and the application context that
ties them together. Feature-specific SQL and business logic stay in the
feature package (e.g. `events/`).
"""
