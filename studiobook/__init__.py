"""studiobook - booking client for projects, events and team availability"""
