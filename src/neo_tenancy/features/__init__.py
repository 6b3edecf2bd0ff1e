"""Feature modules for neo-tenancy."""
