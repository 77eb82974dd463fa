"""Source catalog adapters"""
