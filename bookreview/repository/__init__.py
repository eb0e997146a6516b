"""Repository layer: SQL for the Books/Reviews tables (SQLite).

Thin functions taking an open Connection; services own commits and
transactions. Every statement binds user values with `?` parameters.
"""
