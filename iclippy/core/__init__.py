"""Core clipboard detection and storage"""
