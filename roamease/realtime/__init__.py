"""Realtime infrastructure (Socket.IO presence and event fanout).

This package holds the cross-domain realtime primitives so notifications,
chat, and marketplace updates share one socket server and one presence view.
"""
