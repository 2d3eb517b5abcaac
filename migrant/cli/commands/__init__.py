from . import add_migration, down, ls_applied, ls_available, plan, up
