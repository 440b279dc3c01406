"""
CineScope: filtering, ranking, aggregation and bubble layout for the movie explorer.
"""
