import os

import psycopg2
from dotenv import load_dotenv

load_dotenv()

DB_CFG = dict(
    host=os.getenv("DB_HOST", "127.0.0.1"),
    port=int(os.getenv("DB_PORT", "5432")),
    dbname=os.getenv("DB_NAME", "sponsors_db"),
    user=os.getenv("DB_USER", "sponsor_user"),
    password=os.getenv("DB_PASSWORD", "sponsor_pass"),
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sponsors (
    account_id UUID PRIMARY KEY,
    tier TEXT NOT NULL,
    expiry_date TIMESTAMPTZ NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS sponsors_created_at_idx ON sponsors (created_at, account_id);

CREATE TABLE IF NOT EXISTS player_accounts (
    account_id UUID PRIMARY KEY,
    display_name TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS player_accounts_display_name_idx
    ON player_accounts (LOWER(display_name));
"""


def main():
    with psycopg2.connect(**DB_CFG) as conn, conn.cursor() as cur:
        cur.execute(SCHEMA_SQL)
        conn.commit()
    print(f"Done. Sponsor tables are present in {DB_CFG['dbname']}.")


if __name__ == "__main__":
    main()
