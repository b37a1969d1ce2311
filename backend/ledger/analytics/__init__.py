"""
Pure aggregation, goal and quota functions.

Nothing in this package touches the database; services fetch records and
hand them over.
"""
