"""
Database seed data.
Initial data population for fresh database installations.
"""

from werkzeug.security import generate_password_hash


def seed_database(db):
    """Insert initial seed data."""

    # 1. Default accounts
    users_data = [
        ('admin', 'admin@sporti.local', 'admin123', 'Administrator', 'admin', None, '9000000001'),
        ('member', 'member@sporti.local', 'member123', 'Demo Member', 'member', 'SP', '9000000002'),
    ]

    for username, email, password, full_name, role, designation, phone in users_data:
        db.execute('''
            INSERT INTO users (username, email, password_hash, full_name, role, designation, phone)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        ''', (username, email, generate_password_hash(password), full_name, role, designation, phone))

    # 2. Rooms: (name, location, category, floor, member_rate, guest_rate)
    rooms_data = [
        ('101', 'SPORTI-1', 'Standard', 'Ground Floor', 800, 1500),
        ('102', 'SPORTI-1', 'Standard', 'Ground Floor', 800, 1500),
        ('201', 'SPORTI-1', 'Family', 'First Floor', 1200, 2200),
        ('301', 'SPORTI-1', 'VIP', 'Second Floor', 2000, 3500),
        ('101', 'SPORTI-2', 'Standard', 'Ground Floor', 700, 1300),
        ('201', 'SPORTI-2', 'VIP', 'First Floor', 1800, 3000),
    ]

    for name, location, category, floor, member_rate, guest_rate in rooms_data:
        db.execute('''
            INSERT INTO resources (resource_kind, name, location, category, floor, member_rate, guest_rate)
            VALUES ('room', ?, ?, ?, ?, ?, ?)
        ''', (name, location, category, floor, member_rate, guest_rate))

    # 3. Services: (name, location, type, capacity, member_rate, guest_rate)
    services_data = [
        ('Conference Room A', 'SPORTI-1', 'Conference Room', 40, 5000, 8000),
        ('Main Hall', 'SPORTI-1', 'Main Function Hall', 250, 20000, 35000),
        ('Conference Room B', 'SPORTI-2', 'Conference Room', 25, 4000, 6500),
    ]

    for name, location, service_type, capacity, member_rate, guest_rate in services_data:
        db.execute('''
            INSERT INTO resources (resource_kind, name, location, category, capacity, member_rate, guest_rate)
            VALUES ('service', ?, ?, ?, ?, ?, ?)
        ''', (name, location, service_type, capacity, member_rate, guest_rate))
