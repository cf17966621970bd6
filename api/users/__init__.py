"""
User resource: schemas, SQL, service logic and HTTP routes.
"""
