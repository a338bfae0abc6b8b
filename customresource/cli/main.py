def main():
    from .customresource import customresource

    customresource()


if __name__ == "__main__":
    main()
