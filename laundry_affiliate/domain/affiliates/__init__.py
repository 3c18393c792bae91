"""Affiliate registration and profile"""
