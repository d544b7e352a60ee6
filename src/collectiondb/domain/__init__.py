"""Domain layer - collection definitions and schema compilation rules.

This layer has no dependency on the database engine. It defines the
collection entities, the error kinds, and the column plan shared by every
renderer.
"""
