"""Hazard pointers: hazard bags, shields, retired sets and process-wide defaults."""