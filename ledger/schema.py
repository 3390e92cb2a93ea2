SCHEMA_SQL = r"""
-- Purchases (one purchase = one batch)
CREATE TABLE IF NOT EXISTS purchases (
  id TEXT PRIMARY KEY,                   -- opaque, never reused
  date TEXT NOT NULL,                    -- ISO date
  quantity REAL NOT NULL,
  unit_price REAL NOT NULL,
  amount REAL NOT NULL DEFAULT 0,
  batch_sequence TEXT,                   -- two-digit intra-day sequence ("01", "02", ...)
  batch_name TEXT,                       -- frozen display label, e.g. "P - 01092025-01"
  created_at TEXT NOT NULL
);

-- Sales (batch_id is not a foreign key: a deleted purchase leaves dangling sales)
CREATE TABLE IF NOT EXISTS sales (
  id TEXT PRIMARY KEY,
  date TEXT NOT NULL,
  batch_id TEXT,
  customer TEXT,
  quantity REAL NOT NULL,
  unit_price REAL NOT NULL,
  amount REAL NOT NULL DEFAULT 0,
  created_at TEXT NOT NULL
);

-- Expenses charged in full against a batch
CREATE TABLE IF NOT EXISTS expenses (
  id TEXT PRIMARY KEY,
  date TEXT NOT NULL,
  batch_id TEXT,
  name TEXT,
  amount REAL NOT NULL,
  created_at TEXT NOT NULL
);

-- Customer payments (not linked to a batch)
CREATE TABLE IF NOT EXISTS payments (
  id TEXT PRIMARY KEY,
  date TEXT NOT NULL,
  customer TEXT,
  amount REAL NOT NULL,
  created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_purchases_date ON purchases(date);
CREATE INDEX IF NOT EXISTS idx_sales_batch ON sales(batch_id);
CREATE INDEX IF NOT EXISTS idx_expenses_batch ON expenses(batch_id);
"""
