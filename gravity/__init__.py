"""Gravity — spacing and alignment that pulls element groups toward a point.

Stages:

  tree    — document model: element arena, JSON parsing, validation
  layout  — force model and the per-group gravity layout pass
  web     — HTTP API around the layout pass
"""
