from lertsim.cli import main

raise SystemExit(main())
