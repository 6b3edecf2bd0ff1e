"""Core building blocks shared by all neo-tenancy features."""
