"""
Companion evaluation service for the Playwright to Azure DevOps converter.
"""
