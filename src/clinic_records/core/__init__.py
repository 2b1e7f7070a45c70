"""Core building blocks shared by every clinic-records feature."""
