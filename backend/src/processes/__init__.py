"""Processes module for DocFlow API

Document routing engine (create, forward, assign, status, delete), read-side
queries, dashboard aggregates and the HTTP endpoints exposing them.
"""
