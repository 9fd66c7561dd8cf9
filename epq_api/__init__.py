"""HTTP service exposing the answer engine"""
