USER = "user"
EDITOR = "editor"
ADMIN = "admin"

STAFF_ROLES = (EDITOR, ADMIN)
