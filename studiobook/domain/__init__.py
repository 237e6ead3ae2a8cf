"""Editing domains - booking drafts and project sections"""
