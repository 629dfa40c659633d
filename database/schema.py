"""
Database schema definitions.
Table creation, indexes, and structure management.

Timestamps are stored as ISO text ('YYYY-MM-DD HH:MM:SS') so that string
comparison in SQL matches chronological order.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'booking_status_history',
        'bookings',
        'resources',
        'users'
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Members and administrators
    db.execute('''
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            full_name TEXT,
            role TEXT NOT NULL DEFAULT 'member' CHECK(role IN ('member', 'admin')),
            designation TEXT,
            phone TEXT,
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            last_login TEXT
        )
    ''')

    # 2. Bookable rooms and services
    db.execute('''
        CREATE TABLE resources (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            resource_kind TEXT NOT NULL CHECK(resource_kind IN ('room', 'service')),
            name TEXT NOT NULL,
            location TEXT NOT NULL,
            category TEXT NOT NULL,
            floor TEXT,
            capacity INTEGER,
            member_rate INTEGER NOT NULL DEFAULT 0,
            guest_rate INTEGER NOT NULL DEFAULT 0,
            is_blocked INTEGER DEFAULT 0,
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(resource_kind, location, name)
        )
    ''')

    # 3. Bookings
    db.execute('''
        CREATE TABLE bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            application_number TEXT UNIQUE,
            channel TEXT NOT NULL CHECK(channel IN ('member', 'non_member')),
            user_id INTEGER REFERENCES users(id),
            booking_type TEXT NOT NULL CHECK(booking_type IN ('room', 'service')),
            booking_for TEXT NOT NULL CHECK(booking_for IN ('Self', 'Guest')),
            relation TEXT NOT NULL,
            location TEXT NOT NULL,
            category TEXT NOT NULL,
            check_in TEXT NOT NULL,
            check_out TEXT NOT NULL,
            guest_count INTEGER,
            resource_id INTEGER REFERENCES resources(id),
            total_cost INTEGER NOT NULL DEFAULT 0,
            status TEXT NOT NULL DEFAULT 'pending'
                CHECK(status IN ('pending', 'confirmed', 'rejected', 'completed', 'cancelled')),
            payment_status TEXT NOT NULL DEFAULT 'pending'
                CHECK(payment_status IN ('pending', 'paid', 'failed')),

            occupant_name TEXT NOT NULL,
            occupant_phone TEXT NOT NULL,
            occupant_gender TEXT,
            occupant_email TEXT,
            occupant_location TEXT NOT NULL,

            officer_name TEXT,
            officer_designation TEXT,
            officer_phone TEXT,
            officer_email TEXT,
            officer_gender TEXT,

            remarks TEXT,
            created_by TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            CHECK(check_in < check_out)
        )
    ''')

    # 4. Status, payment and occupancy history
    db.execute('''
        CREATE TABLE booking_status_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            booking_id INTEGER NOT NULL REFERENCES bookings(id) ON DELETE CASCADE,
            field TEXT NOT NULL CHECK(field IN ('status', 'payment', 'occupancy', 'resource')),
            action TEXT NOT NULL,
            from_value TEXT,
            to_value TEXT,
            changed_by TEXT,
            notes TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""
    db.execute('CREATE INDEX idx_resources_lookup ON resources(resource_kind, location, category)')
    db.execute('CREATE INDEX idx_bookings_resource_dates ON bookings(resource_id, check_in, check_out)')
    db.execute('CREATE INDEX idx_bookings_status ON bookings(status)')
    db.execute('CREATE INDEX idx_bookings_user ON bookings(user_id)')
    db.execute('CREATE INDEX idx_history_booking ON booking_status_history(booking_id)')
