"""Corpus build pipeline: normalize raw records, index entities, compute stats."""
