"""Rowdy Cup live golf scoreboard."""
