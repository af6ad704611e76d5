"""Default values of every testngreport setting.

Only names defined here are accepted as settings, whether in the user's testngreportrc file
or with --set on the command line.
"""


# Number of bytes to read from a results file at a time while parsing it
read_chunk_bytes = 0x10000

# Pattern used to find results files when a directory is given instead of a file
result_file_glob = '**/testng-results.xml'

# Number of times to retry a failed results file download
download_retries = 4

# Backoff factor (in seconds) between download retries
download_backoff_factor = 10

# Seconds to wait for a download server to respond
download_timeout = 60
