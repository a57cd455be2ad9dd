"""Appointment lifecycle: create, move, break, delete"""
