"""Foundation: errors and configuration shared by every retrycase layer."""
