"""Pickup orders: creation through the booking gate and status lifecycle"""
