# In-memory stand-in for a users table.

USERS = [
    {'id': 1, 'name': 'Angela', 'email': 'angela@example.com'},
    {'id': 2, 'name': 'Miggy', 'email': 'miggy@example.com'},
]


def get_all_users():
    return USERS


def get_user_by_id(user_id):
    for user in USERS:
        if user['id'] == user_id:
            return user
    return None
