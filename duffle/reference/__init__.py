"""Parsing and validation of image-style references: names, tags and digests."""