"""Domain packages: resources, scheduling engine, appointment lifecycle"""
