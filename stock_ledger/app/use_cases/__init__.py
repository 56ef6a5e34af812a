"""Application use cases"""
