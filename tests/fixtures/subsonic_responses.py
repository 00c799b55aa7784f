"""
Reponses simulees de l'API Subsonic (f=json, enveloppe subsonic-response).
"""

SUBSONIC_BASE_URL = "http://navidrome:4533"


def ok(**payload) -> dict:
    """Reponse Subsonic en succes."""
    return {"subsonic-response": {"status": "ok", "version": "1.16.1", **payload}}


def failed(code: int, message: str) -> dict:
    """Reponse Subsonic en echec (toujours servie en HTTP 200)."""
    return {
        "subsonic-response": {
            "status": "failed",
            "version": "1.16.1",
            "error": {"code": code, "message": message},
        }
    }


SONG_1 = {
    "id": "s1",
    "title": "So What",
    "album": "Kind of Blue",
    "albumId": "al1",
    "artist": "Miles Davis",
    "artistId": "ar1",
    "track": 1,
    "discNumber": 1,
    "year": 1959,
    "genre": "Jazz",
    "duration": 562,
    "playCount": 12,
    "coverArt": "al1",
    "created": "2023-05-01T12:00:00.000Z",
}

SONG_2 = {
    "id": "s2",
    "title": "Freddie Freeloader",
    "album": "Kind of Blue",
    "albumId": "al1",
    "artist": "Miles Davis",
    "artistId": "ar1",
    "track": 2,
    "year": 1959,
    "genre": "Jazz",
    "duration": 589,
}

SEARCH_SONGS_RESPONSE = ok(searchResult3={"song": [SONG_1, SONG_2]})

PLAYLIST_RESPONSE = ok(
    playlist={
        "id": "p1",
        "name": "Jazz du soir",
        "comment": "Pour les soirées calmes",
        "public": True,
        "changed": "2024-01-05T21:00:00Z",
        "entry": [SONG_1, SONG_2],
    }
)

NOT_FOUND_RESPONSE = failed(70, "Playlist not found")
WRONG_CREDENTIALS_RESPONSE = failed(40, "Wrong username or password")
