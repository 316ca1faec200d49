#!/usr/bin/env python3
"""Create the support desk database tables."""

import os
import psycopg2
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")

SQL = """
-- 1. countries / timezones (reference data)
CREATE TABLE IF NOT EXISTS countries (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    code VARCHAR(2) UNIQUE NOT NULL,
    name VARCHAR(100) NOT NULL
);

CREATE TABLE IF NOT EXISTS timezones (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    country_id UUID REFERENCES countries(id),
    name VARCHAR(100) NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_timezones_country_id ON timezones(country_id);

-- 2. users (admins, TAMs and customer users)
CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name VARCHAR(100) NOT NULL,
    full_name VARCHAR(255),
    email VARCHAR(255) NOT NULL UNIQUE,
    password_hash VARCHAR(255) NOT NULL,
    type VARCHAR(20) NOT NULL DEFAULT 'user',
    phone_number VARCHAR(50),
    phone_extension VARCHAR(20),
    social VARCHAR(255),
    country_id UUID REFERENCES countries(id),
    timezone_id UUID REFERENCES timezones(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    deleted_at TIMESTAMPTZ
);

-- 3. companies
CREATE TABLE IF NOT EXISTS companies (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name VARCHAR(255) NOT NULL,
    address1 VARCHAR(255),
    address2 VARCHAR(255),
    city VARCHAR(100),
    state VARCHAR(100),
    zip VARCHAR(20),
    country_id UUID REFERENCES countries(id),
    timezone_id UUID REFERENCES timezones(id),
    phone_number VARCHAR(50),
    primary_contact_id UUID REFERENCES users(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    deleted_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS company_users (
    company_id UUID NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
    user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    PRIMARY KEY (company_id, user_id)
);

-- 4. entitlements
CREATE TABLE IF NOT EXISTS entitlements (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name VARCHAR(100) NOT NULL,
    description TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

-- 5. support_levels
CREATE TABLE IF NOT EXISTS support_levels (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name VARCHAR(100) NOT NULL,
    description TEXT NOT NULL,
    level INTEGER NOT NULL CHECK (level >= 0),
    color VARCHAR(50) NOT NULL,
    from_day SMALLINT NOT NULL DEFAULT 1,
    from_time SMALLINT NOT NULL DEFAULT 0,
    to_day SMALLINT NOT NULL DEFAULT 7,
    to_time SMALLINT NOT NULL DEFAULT 23,
    country_id UUID REFERENCES countries(id),
    timezone_id UUID REFERENCES timezones(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_support_levels_level ON support_levels(level);

-- 6. company_entitlements (duration: 1 = monthly, 2 = yearly)
CREATE TABLE IF NOT EXISTS company_entitlements (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    company_id UUID NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
    entitlement_id UUID NOT NULL REFERENCES entitlements(id),
    support_level_id UUID NOT NULL REFERENCES support_levels(id),
    date DATE NOT NULL DEFAULT CURRENT_DATE,
    duration SMALLINT NOT NULL DEFAULT 2 CHECK (duration IN (1, 2)),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE(company_id, entitlement_id, support_level_id)
);
CREATE INDEX IF NOT EXISTS idx_company_entitlements_company_id ON company_entitlements(company_id);

-- 7. tickets (only the grant reference matters to this service)
CREATE TABLE IF NOT EXISTS tickets (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    company_entitlement_id UUID REFERENCES company_entitlements(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_tickets_company_entitlement_id ON tickets(company_entitlement_id);
"""

SEED_COUNTRIES = """
INSERT INTO countries (code, name) VALUES
    ('US', 'United States')
ON CONFLICT (code) DO NOTHING;
"""

SEED_TIMEZONES = """
INSERT INTO timezones (country_id, name)
SELECT c.id, 'America/New_York'
FROM countries c WHERE c.code = 'US'
AND NOT EXISTS (SELECT 1 FROM timezones t WHERE t.name = 'America/New_York');
"""

def main():
    print(f"Connecting to database...")
    conn = psycopg2.connect(DATABASE_URL)
    conn.autocommit = True
    cur = conn.cursor()

    print("Creating tables...")
    cur.execute(SQL)

    print("Seeding countries...")
    cur.execute(SEED_COUNTRIES)

    print("Seeding timezones...")
    cur.execute(SEED_TIMEZONES)

    cur.execute("SELECT table_name FROM information_schema.tables WHERE table_schema = 'public' ORDER BY table_name;")
    tables = cur.fetchall()
    print(f"\nTables created: {[t[0] for t in tables]}")

    cur.close()
    conn.close()
    print("\nDone!")

if __name__ == "__main__":
    main()
