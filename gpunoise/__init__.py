#-*- coding: utf-8 -*-
"""
gpunoise

full screen animated noise rendered by a single oversized triangle
and a cheap hash fragment shader.

    python -m gpunoise
"""
__version__ = '0.1.0'
