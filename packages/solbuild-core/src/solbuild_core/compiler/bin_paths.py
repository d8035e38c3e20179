"""Catalog of compiler releases with downloadable binaries.

Maps a short version to the full release version. The download build
identifier is derived per platform, e.g.
``solc-linux-amd64-v0.8.20+commit.a1b79de6``.
"""

from __future__ import annotations

BIN_PATHS: dict[str, str] = {
    "0.4.24": "0.4.24+commit.e67f0147",
    "0.4.25": "0.4.25+commit.59dbf8f1",
    "0.4.26": "0.4.26+commit.4563c3fc",
    "0.5.0": "0.5.0+commit.1d4f565a",
    "0.5.16": "0.5.16+commit.9c3226ce",
    "0.5.17": "0.5.17+commit.d19bba13",
    "0.6.0": "0.6.0+commit.26b70077",
    "0.6.2": "0.6.2+commit.bacdbe57",
    "0.6.6": "0.6.6+commit.6c089d02",
    "0.6.12": "0.6.12+commit.27d51765",
    "0.7.0": "0.7.0+commit.9e61f92b",
    "0.7.6": "0.7.6+commit.7338295f",
    "0.8.0": "0.8.0+commit.c7dfd78e",
    "0.8.4": "0.8.4+commit.c7e474f2",
    "0.8.17": "0.8.17+commit.8df45f5f",
    "0.8.19": "0.8.19+commit.7dd6d404",
    "0.8.20": "0.8.20+commit.a1b79de6",
    "0.8.21": "0.8.21+commit.d9974bed",
    "0.8.23": "0.8.23+commit.f704f362",
    "0.8.24": "0.8.24+commit.e11b9ed9",
    "0.8.26": "0.8.26+commit.8a97fa7a",
    "0.8.28": "0.8.28+commit.7893614a",
}
