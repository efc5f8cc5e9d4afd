"""SchoolHub: school management API with role-based dashboards."""
