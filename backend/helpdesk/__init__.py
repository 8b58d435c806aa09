"""Helpdesk - motor de SLA"""
