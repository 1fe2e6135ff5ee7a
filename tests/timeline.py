"""Fixed clock values and the test database URL shared across test modules."""

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# A fixed "now" in ms so timing math is exact
NOW = 1_700_000_000_000
DAY = 300_000
TICK = 15_000
