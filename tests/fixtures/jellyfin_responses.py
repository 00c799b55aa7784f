"""
Reponses simulees de l'API Jellyfin (format BaseItemDto, partage avec Emby).
"""

JELLYFIN_BASE_URL = "http://jellyfin:8096"

MOVIE_MATRIX = {
    "Id": "m1",
    "Name": "Matrix",
    "Type": "Movie",
    "Overview": "Un pirate informatique découvre la vraie nature de sa réalité.",
    "ProductionYear": 1999,
    "PremiereDate": "1999-03-31T00:00:00.0000000Z",
    "DateCreated": "2024-01-10T20:15:30.1234567Z",
    "Genres": ["Action", "Science-Fiction"],
    "Studios": [{"Name": "Warner Bros."}],
    "CommunityRating": 8.2,
    "RunTimeTicks": 81_600_000_000,
    "ProviderIds": {"Tmdb": "603", "Imdb": "tt0133093"},
    "People": [
        {"Name": "Keanu Reeves", "Type": "Actor"},
        {"Name": "Lana Wachowski", "Type": "Director"},
    ],
    "Taglines": ["Bienvenue dans le monde réel."],
    "OfficialRating": "R",
    "ImageTags": {"Primary": "abc"},
    "UserData": {"PlayCount": 3},
}

MOVIE_ALIEN = {
    "Id": "m2",
    "Name": "Alien",
    "Type": "Movie",
    "ProductionYear": 1979,
    "DateCreated": "2024-02-01T10:00:00Z",
    "CommunityRating": 8.5,
    "ProviderIds": {"Tmdb": "348"},
}

MOVIES_RESPONSE = {"Items": [MOVIE_MATRIX, MOVIE_ALIEN], "TotalRecordCount": 2}

PLAYLIST_DTO = {
    "Id": "pl1",
    "Name": "Soirée SF",
    "Type": "Playlist",
    "Overview": "Films de science-fiction",
    "DateCreated": "2024-03-01T18:00:00Z",
}

PLAYLIST_ITEMS_RESPONSE = {
    "Items": [
        dict(MOVIE_MATRIX, PlaylistItemId="e1"),
        dict(MOVIE_ALIEN, PlaylistItemId="e2"),
    ]
}

BOXSET_DTO = {
    "Id": "bs1",
    "Name": "Trilogie Matrix",
    "Type": "BoxSet",
}

SYSTEM_INFO_RESPONSE = {"ServerName": "jellyfin", "Version": "10.9.0", "Id": "srv"}
