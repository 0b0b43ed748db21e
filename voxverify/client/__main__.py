import sys

from voxverify.client.uploader import main

if __name__ == "__main__":
    sys.exit(main())
