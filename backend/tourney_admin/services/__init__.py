"""
Services Layer

Pure seeding/bracket configuration logic that:
- Accepts value objects (configurations, breakdowns, rosters)
- Returns new value objects or structured results
- Does NOT touch the database or HTTP request/response objects
"""
