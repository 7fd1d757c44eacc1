"""
Mirror module — Local git mirrors of remote repositories.
"""
