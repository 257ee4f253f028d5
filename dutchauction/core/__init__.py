"""Auction core: pricing, state machine, settlement and collaborators"""
