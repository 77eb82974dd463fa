"""mdb2sql extensions"""
