"""mdb2sql command line tools"""
