"""mdb2sql configuration"""
