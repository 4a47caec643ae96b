"""Engine layer - observation, scheduling and playback"""
