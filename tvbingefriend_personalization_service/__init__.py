"""TV BingeFriend personalization service"""
