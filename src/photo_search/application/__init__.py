"""
Application Layer - Use cases coordinating domain and infrastructure.
"""
