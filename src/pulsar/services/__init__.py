"""Domain services: engagement rules, comment threads, projections and feeds."""
