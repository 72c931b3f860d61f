"""Graph schema definitions for the people/films/episodes graph.

This module defines:
- Node labels (Person, Movie, TvEpisode, TvShow)
- Relationship types linking people to projects
- The filterable fields of each filter category and their semantic types
"""

from typing import Dict

# Node labels
PERSON = "Person"
MOVIE = "Movie"
TV_EPISODE = "TvEpisode"
TV_SHOW = "TvShow"

PROJECT_LABELS = (MOVIE, TV_EPISODE)

# Relationship types
CAST_FOR = "CAST_FOR"
CREW_FOR = "CREW_FOR"

RELATIONSHIP_TYPES = (CAST_FOR, CREW_FOR)

# Property keys
PERSON_ID = "person_id"
MOVIE_ID = "movie_id"
EPISODE_ID = "episode_id"
SHOW_ID = "show_id"
LEGACY_SHOW_ID = "tv_show_id"
TV_ID = "tv_id"
LOWERCASE_NAME = "lowercase_name"
POPULARITY = "popularity"

# Semantic field types
STRING = "string"
INT = "int"
FLOAT = "float"
BOOLEAN = "boolean"
DATE = "date"
STRING_LIST = "string_list"
INT_LIST = "int_list"

# Types that support the comparison and range suffixes
ORDERED_TYPES = frozenset({INT, FLOAT, DATE})

# Filter categories and the label each one constrains
PERSON_CATEGORY = "person"
MOVIE_CATEGORY = "movie"
EPISODE_CATEGORY = "episode"

CATEGORY_LABELS = {
    PERSON_CATEGORY: PERSON,
    MOVIE_CATEGORY: MOVIE,
    EPISODE_CATEGORY: TV_EPISODE,
}

PERSON_FIELDS: Dict[str, str] = {
    "adult": BOOLEAN,
    "birthday": DATE,
    "deathday": DATE,
    "gender": INT,
    "imdb_id": STRING,
    "name": STRING,
    "person_id": INT,
    "popularity": FLOAT,
}

MOVIE_FIELDS: Dict[str, str] = {
    "adult": BOOLEAN,
    "budget": INT,
    "revenue": INT,
    "genres": STRING_LIST,
    "imdb_id": STRING,
    "movie_id": INT,
    "production_companies": INT_LIST,
    "spoken_languages": STRING_LIST,
    "release_date": DATE,
    "status": STRING,
    "runtime": INT,
    "title": STRING,
}

EPISODE_FIELDS: Dict[str, str] = {
    "air_date": DATE,
    "episode_id": STRING,
    "vote_average": FLOAT,
    "vote_count": INT,
    "runtime": INT,
    "season": INT,
    "episode": INT,
    "show_id": INT,
    "title": STRING,
}

CATEGORY_FIELDS = {
    PERSON_CATEGORY: PERSON_FIELDS,
    MOVIE_CATEGORY: MOVIE_FIELDS,
    EPISODE_CATEGORY: EPISODE_FIELDS,
}
