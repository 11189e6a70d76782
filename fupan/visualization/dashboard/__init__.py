# -*- coding: utf-8 -*-
"""Dashboard module"""
