"""
dbmigrate - numbered schema migrations for relational databases.

Tracks which numbered migration units have been applied to a database,
applies or reverts them to reach a requested version, and generates DDL
for Oracle, MySQL, PostgreSQL, SQLite, SQL Server and ANSI databases from
one description.
"""

__version__ = "0.1.0"
