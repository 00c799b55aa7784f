"""
Reponses simulees de l'API TMDB.

Utilisees avec respx pour intercepter les appels httpx du TMDBClient.
"""

# GET /search/movie?query=Avatar
TMDB_SEARCH_RESPONSE = {
    "page": 1,
    "results": [
        {
            "genre_ids": [28, 12, 14, 878],
            "id": 19995,
            "original_title": "Avatar",
            "overview": "L'histoire d'un ancien marine paraplégique...",
            "popularity": 456.92,
            "poster_path": "/jRXYjXNq0Cs2TcJjLkki24MLp7u.jpg",
            "release_date": "2009-12-15",
            "title": "Avatar",
            "vote_average": 7.6,
        },
        {
            "genre_ids": [28, 12, 878],
            "id": 76600,
            "original_title": "Avatar: The Way of Water",
            "overview": "Se déroulant plus d'une décennie après les événements...",
            "popularity": 234.56,
            "poster_path": "/t6HIqrRAclMCA60NsSmeqe9RmNV.jpg",
            "release_date": "2022-12-14",
            "title": "Avatar: La Voie de l'eau",
            "vote_average": 7.7,
        },
    ],
    "total_pages": 1,
    "total_results": 2,
}

TMDB_SEARCH_EMPTY_RESPONSE = {
    "page": 1,
    "results": [],
    "total_pages": 0,
    "total_results": 0,
}

# GET /movie/19995?append_to_response=credits,external_ids
TMDB_MOVIE_DETAILS_RESPONSE = {
    "genres": [
        {"id": 28, "name": "Action"},
        {"id": 12, "name": "Aventure"},
        {"id": 14, "name": "Fantastique"},
        {"id": 878, "name": "Science-Fiction"},
    ],
    "id": 19995,
    "imdb_id": "tt0499549",
    "original_title": "Avatar",
    "overview": "Malgré sa paralysie, Jake Sully, un ancien marine...",
    "popularity": 456.92,
    "poster_path": "/jRXYjXNq0Cs2TcJjLkki24MLp7u.jpg",
    "production_companies": [{"id": 574, "name": "Lightstorm Entertainment"}],
    "release_date": "2009-12-15",
    "runtime": 162,
    "tagline": "Entrez dans un nouveau monde.",
    "title": "Avatar",
    "vote_average": 7.6,
    "credits": {
        "cast": [
            {"id": 17647, "name": "Sam Worthington", "character": "Jake Sully"},
            {"id": 8691, "name": "Zoe Saldana", "character": "Neytiri"},
        ],
        "crew": [
            {"id": 2710, "name": "James Cameron", "job": "Director"},
            {"id": 2710, "name": "James Cameron", "job": "Writer"},
        ],
    },
    "external_ids": {"imdb_id": "tt0499549"},
}

# GET /tv/1396?append_to_response=credits,external_ids
TMDB_SERIES_DETAILS_RESPONSE = {
    "id": 1396,
    "name": "Breaking Bad",
    "overview": "Un professeur de chimie atteint d'un cancer...",
    "first_air_date": "2008-01-20",
    "genres": [{"id": 18, "name": "Drame"}],
    "episode_run_time": [47],
    "number_of_seasons": 5,
    "number_of_episodes": 62,
    "status": "Ended",
    "networks": [{"id": 174, "name": "AMC"}],
    "created_by": [{"id": 66633, "name": "Vince Gilligan"}],
    "vote_average": 8.9,
    "popularity": 300.1,
    "poster_path": "/ggFHVNu6YYI5L9pCfOacjizRGt.jpg",
    "credits": {"cast": [{"id": 17419, "name": "Bryan Cranston"}]},
    "external_ids": {"imdb_id": "tt0903747", "tvdb_id": 81189},
    "seasons": [
        {
            "id": 3572,
            "name": "Saison 1",
            "season_number": 1,
            "episode_count": 7,
            "air_date": "2008-01-20",
        },
        {
            "id": 3573,
            "name": "Saison 2",
            "season_number": 2,
            "episode_count": 13,
            "air_date": "2009-03-08",
        },
    ],
}

# GET /collection/87096
TMDB_COLLECTION_RESPONSE = {
    "id": 87096,
    "name": "Avatar - Saga",
    "overview": "La saga Avatar.",
    "poster_path": "/uO2yU3QiGHvVp0L5e5IatTVRkYk.jpg",
    "parts": [
        {"id": 19995, "title": "Avatar", "release_date": "2009-12-15", "genre_ids": [28]},
        {"id": 76600, "title": "Avatar: La Voie de l'eau", "release_date": "2022-12-14"},
    ],
}
