"""
Process-level plumbing for the user service: the Postgres handle and its
error types, environment settings, and logging setup. Table SQL lives in
`users/repository.py`, not here.
"""
