SCHEMA_SQL = r"""
-- One row per persisted collection; value is a JSON document.
CREATE TABLE IF NOT EXISTS kv_store (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,
  updated_at TEXT NOT NULL            -- ISO datetime (UTC)
);
"""
